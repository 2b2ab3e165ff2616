"""
Collection admission checks: who may write into a collection, and whether
the URL is already in it.

Both checks raise StoreLookupError when the store can't answer. A failed
lookup must never be read as "not authorized" or "not a duplicate".
"""

from .store_utils import (
    CATEGORIES_TABLE_NAME,
    MAIN_TABLE_NAME,
    SHARED_CATEGORIES_TABLE_NAME,
)


def is_category_owner_or_collaborator(store, category_id: int, user_id: str, email: str) -> bool:
    """
    Check if the user owns the collection or collaborates on it with edit access.

    Args:
        store: RecordStore (or anything with the same select())
        category_id: Normalized, non-zero collection id
        user_id: Id of the submitting user
        email: Contact address the collaborator invite was sent to

    Returns:
        True if owner, else the collaborator's edit_access, else False
    """
    categories = store.select(CATEGORIES_TABLE_NAME, 'user_id', {'id': category_id})
    if categories and categories[0].get('user_id') == user_id:
        return True

    if not email:
        return False

    shared = store.select(
        SHARED_CATEGORIES_TABLE_NAME,
        'id, edit_access',
        {'category_id': category_id, 'email': email}
    )
    if shared:
        return bool(shared[0].get('edit_access'))

    return False


def bookmark_exists(store, url: str, category_id: int) -> bool:
    """Check for a non-trashed bookmark with exactly this URL in this collection."""
    rows = store.select(
        MAIN_TABLE_NAME,
        'id',
        {'url': url, 'category_id': category_id, 'trash': False}
    )
    return len(rows) > 0
