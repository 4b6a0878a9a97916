from __future__ import annotations
from typing import Any, Dict, List

TEXT_SCORE = {"$meta": "textScore"}


def search_products(
    db, term: str, *, limit: int = 10, active_only: bool = True
) -> List[Dict[str, Any]]:
    """Relevance-ranked product search over the ``product_text_search`` index.

    Name matches carry weight 10 and description matches weight 5, so a product
    named after the term ranks above one that only mentions it. Needs a server
    that supports ``$text``.
    """
    query: Dict[str, Any] = {"$text": {"$search": term}}
    if active_only:
        query["active"] = True
    cursor = (
        db["products"]
        .find(query, {"score": TEXT_SCORE})
        .sort([("score", TEXT_SCORE)])
        .limit(limit)
    )
    return list(cursor)
