"""
Named query variables for one session.
"""

import logging
from typing import Dict, List, Optional, Union

from ..lineindex.query import Query, word_query

logger = logging.getLogger(__name__)


class VariableStore:
    """
    Maps variable names to queries for the lifetime of one session.
    
    Two storage modes:
        text:  only the representation of the query is kept. Resolving the
               name yields a WORD query over that text, so a bound compound
               expression is looked up as a single term.
        query: the Query itself is kept and returned unchanged.
    """
    
    MODES = ('text', 'query')
    
    def __init__(self, mode: str = 'text'):
        """
        Initialize variable store.
        
        Args:
            mode: 'text' or 'query'
        """
        if mode not in self.MODES:
            raise ValueError(f"Unknown variable mode: {mode}")
        
        self.mode = mode
        self._bindings: Dict[str, Union[str, Query]] = {}
    
    def bind(self, name: str, query: Query):
        """
        Bind a name to a query, replacing any previous binding.
        
        Args:
            name: Variable name
            query: Query to bind
        """
        if self.mode == 'text':
            self._bindings[name] = query.rep()
        else:
            self._bindings[name] = query
        logger.debug(f"Bound {name} = {query.rep()} ({self.mode} mode)")
    
    def lookup_text(self, name: str) -> Optional[str]:
        """Get the representation bound to a name, or None."""
        value = self._bindings.get(name)
        if value is None:
            return None
        return value if isinstance(value, str) else value.rep()
    
    def resolve(self, token: str) -> Query:
        """
        Turn user input into a query.
        
        Args:
            token: A variable name or a plain word
            
        Returns:
            The bound query for a variable name, otherwise a WORD query
        """
        value = self._bindings.get(token)
        if value is None:
            return word_query(token)
        if isinstance(value, str):
            return word_query(value)
        return value
    
    def names(self) -> List[str]:
        """Get all bound names, sorted."""
        return sorted(self._bindings)
    
    def __contains__(self, name: str) -> bool:
        return name in self._bindings
    
    def __len__(self) -> int:
        return len(self._bindings)
