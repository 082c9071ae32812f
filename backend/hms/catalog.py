"""Default navigation menus, features and roles."""
import logging

from sqlalchemy.orm import Session

from hms.models import Feature, Menu, Role

logger = logging.getLogger(__name__)

DEFAULT_MENUS = [
    {"menu_name": "Dashboard", "route": "/dashboard", "component": "Dashboard", "menu_order": 1},
    {"menu_name": "Users", "route": "/users", "component": "UserList", "menu_order": 2},
    {"menu_name": "Roles", "route": "/roles", "component": "RoleList", "menu_order": 3},
    {"menu_name": "Settings", "route": "/settings", "component": "Settings", "menu_order": 4},
]

# feature_code -> (feature_name, menu_name)
DEFAULT_FEATURES = {
    "USER_CREATE": ("Create User", "Users"),
    "USER_EDIT": ("Edit User", "Users"),
    "ROLE_MANAGE": ("Manage Roles", "Roles"),
    "SETTINGS_EDIT": ("Edit Settings", "Settings"),
}

DEFAULT_ROLES = {
    "Administrator": "Full access to all menus and features",
    "Doctor": "Clinical staff",
    "Nurse": "Nursing staff",
    "Receptionist": "Front desk",
}


def seed_catalog(db: Session) -> dict:
    """Insert missing default menus, features and roles. Returns created counts."""
    created = {"menus": 0, "features": 0, "roles": 0}
    
    menus: dict[str, Menu] = {m.menu_name: m for m in db.query(Menu).all()}
    for entry in DEFAULT_MENUS:
        if entry["menu_name"] not in menus:
            menu = Menu(**entry)
            db.add(menu)
            menus[menu.menu_name] = menu
            created["menus"] += 1
    db.flush()
    
    existing_codes = {code for (code,) in db.query(Feature.feature_code).all()}
    for code, (name, menu_name) in DEFAULT_FEATURES.items():
        if code not in existing_codes:
            db.add(Feature(feature_code=code, feature_name=name, menu_id=menus[menu_name].id))
            created["features"] += 1
    
    existing_roles = {name for (name,) in db.query(Role.role_name).all()}
    for name, description in DEFAULT_ROLES.items():
        if name not in existing_roles:
            db.add(Role(role_name=name, role_description=description))
            created["roles"] += 1
    
    db.flush()
    logger.info(f"Catalog seeded: {created}")
    return created
