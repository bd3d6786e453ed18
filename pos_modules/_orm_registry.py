"""
Central ORM model registry.

Imports every module's ``orm`` so that all tables are registered on
``Base.metadata`` before ``create_all``.  Add new modules here.
"""


def import_all_orm_models() -> None:
    import pos_modules.inventory.orm  # noqa: F401
    import pos_modules.cash.orm  # noqa: F401
    import pos_modules.sales.orm  # noqa: F401
    import pos_modules.purchasing.orm  # noqa: F401
    import pos_modules.returns.orm  # noqa: F401
    import pos_modules.payroll.orm  # noqa: F401
