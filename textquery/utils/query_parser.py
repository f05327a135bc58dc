import logging
from typing import Callable, List, Optional, Tuple

from ..lineindex.query import Query, word_query

logger = logging.getLogger(__name__)


class BooleanQueryParser:
    """
    Parse boolean query strings into Query expressions.
    Uses the same syntax the expressions print in: ~ (NOT), & (AND), | (OR)
    and parentheses. Every other whitespace-delimited run is a word.
    """
    
    OPERATORS = {'~', '&', '|'}
    
    def __init__(self, resolve: Optional[Callable[[str], Query]] = None):
        """
        Initialize parser.
        
        Args:
            resolve: Maps each word to a query (default: WORD query).
                     Sessions pass their variable lookup here.
        """
        self.resolve = resolve or word_query
    
    def parse(self, query: str) -> Query:
        """
        Parse a query string.
        
        Args:
            query: Query string (e.g., "(fox | dog) & ~sleeps")
            
        Returns:
            Query expression
        """
        tokens = self._tokenize(query)
        if not tokens:
            raise ValueError("Empty query")
        
        expr, pos = self._parse_or_expression(tokens, 0)
        if pos != len(tokens):
            raise ValueError(f"Unexpected token '{tokens[pos]}' at position {pos}")
        
        logger.debug(f"Parsed '{query}' as {expr.rep()}")
        return expr
    
    def _tokenize(self, query: str) -> List[str]:
        """Tokenize query string, splitting operators and parentheses from words."""
        tokens = []
        current_token = []
        
        for char in query:
            if char in '()' or char in self.OPERATORS:
                if current_token:
                    tokens.append(''.join(current_token))
                    current_token = []
                tokens.append(char)
            elif char.isspace():
                if current_token:
                    tokens.append(''.join(current_token))
                    current_token = []
            else:
                current_token.append(char)
        
        if current_token:
            tokens.append(''.join(current_token))
        
        return tokens
    
    def _parse_or_expression(self, tokens: List[str], pos: int) -> Tuple[Query, int]:
        """Parse OR expression (lowest precedence)."""
        left, pos = self._parse_and_expression(tokens, pos)
        
        while pos < len(tokens) and tokens[pos] == '|':
            pos += 1  # Skip |
            right, pos = self._parse_and_expression(tokens, pos)
            left = left | right
        
        return left, pos
    
    def _parse_and_expression(self, tokens: List[str], pos: int) -> Tuple[Query, int]:
        """Parse AND expression (medium precedence)."""
        left, pos = self._parse_not_expression(tokens, pos)
        
        while pos < len(tokens) and tokens[pos] == '&':
            pos += 1  # Skip &
            right, pos = self._parse_not_expression(tokens, pos)
            left = left & right
        
        return left, pos
    
    def _parse_not_expression(self, tokens: List[str], pos: int) -> Tuple[Query, int]:
        """Parse NOT expression (high precedence)."""
        if pos < len(tokens) and tokens[pos] == '~':
            pos += 1  # Skip ~
            expr, pos = self._parse_not_expression(tokens, pos)
            return ~expr, pos
        
        return self._parse_primary(tokens, pos)
    
    def _parse_primary(self, tokens: List[str], pos: int) -> Tuple[Query, int]:
        """Parse primary expression (parentheses or word)."""
        if pos >= len(tokens):
            raise ValueError("Unexpected end of query")
        
        token = tokens[pos]
        
        if token == '(':
            pos += 1  # Skip (
            expr, pos = self._parse_or_expression(tokens, pos)
            if pos >= len(tokens) or tokens[pos] != ')':
                raise ValueError("Missing closing parenthesis")
            pos += 1  # Skip )
            return expr, pos
        
        if token == ')' or token in self.OPERATORS:
            raise ValueError(f"Unexpected token '{token}' at position {pos}")
        
        return self.resolve(token), pos + 1
