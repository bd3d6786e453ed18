"""
POS modules -- per-domain DTOs, ORM models, workflows and services.

Each module follows the same layout:

    models.py     frozen dataclass DTOs and enums (zero I/O)
    orm.py        SQLAlchemy models with to_dto()/from_dto()
    workflows.py  document state machines (where the module has any)
    service.py    session-owning facade that calls pos_engines
"""
