"""
Category use cases
"""
from walletbook.domain.category import CategoryRecord, CATEGORY_TYPES
from walletbook.domain.errors import CategoryValidationError
from walletbook.infrastructure.store import FinanceStore


class CreateCategoryUseCase:
    def __init__(self, store: FinanceStore):
        self.store = store

    def execute(self, name: str, category_type: str) -> CategoryRecord:
        name = (name or "").strip()
        if not name:
            raise CategoryValidationError("Category name is required")
        if category_type not in CATEGORY_TYPES:
            raise CategoryValidationError(
                f"Invalid category type: {category_type}. Use income or expense"
            )
        return self.store.create_category(name, category_type)


def list_categories(store: FinanceStore, category_type: str | None = None) -> list[CategoryRecord]:
    """All categories, or only those of one type (for the add-transaction form)"""
    if category_type is not None and category_type not in CATEGORY_TYPES:
        raise CategoryValidationError(
            f"Invalid category type: {category_type}. Use income or expense"
        )
    return store.list_categories(category_type)
