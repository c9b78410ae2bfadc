"""Document index adapters implementing IndexPort."""

from pzcommon.adapters.index.mock import MockIndex, SearchHit, SearchResult

__all__ = ["MockIndex", "SearchHit", "SearchResult"]
