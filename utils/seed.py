from sqlalchemy import inspect

from models import db
from models.user import Role
from security.rbac import CUSTOMER, SALON_OWNER, SUPER_ADMIN

DEFAULT_ROLES = [CUSTOMER, SALON_OWNER, SUPER_ADMIN]

def seed_roles():
    # fresh database without `flask db upgrade` yet
    if not inspect(db.engine).has_table(Role.__tablename__):
        return
    existing = {r.name for r in Role.query.all()}
    for name in DEFAULT_ROLES:
        if name not in existing:
            db.session.add(Role(name=name))
    db.session.commit()
