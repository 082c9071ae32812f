"""Seed script to create the permission catalog and a demo company admin."""
import sys
import os

# Add backend to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from hms.catalog import seed_catalog
from hms.database import SessionLocal, init_db, transaction
from hms.repositories import UserRepository
from hms.schemas.auth import RegisterCompleteRequest
from hms.services.provisioning import ProvisioningService
from hms.services.registration import RegistrationService

DEMO_ADMIN = {
    "email": "admin@hms.local",
    "password": "Admin@12345",
    "first_name": "Demo",
    "last_name": "Admin",
    "phone": "9000000001",
    "company_name": "Demo Hospital",
}


def seed_database():
    """Create catalog rows, grant the Administrator role and add a demo admin."""
    init_db()
    db = SessionLocal()
    
    try:
        with transaction(db):
            created = seed_catalog(db)
            provisioning = ProvisioningService(db)
            admin_role = provisioning.resolve_or_create_administrator_role()
            provisioning.grant_full_permissions(admin_role.id)
        print(f"Catalog: {created}")
        
        if UserRepository().find_by_email(DEMO_ADMIN["email"], session=db):
            print(f"Demo admin already exists: {DEMO_ADMIN['email']}")
        else:
            print("Creating demo company admin...")
            result = RegistrationService(db).register_complete(
                RegisterCompleteRequest(**DEMO_ADMIN)
            )
            print(f"Created admin user: {result['user'].id} in company {result['company_id']}")
            print(f"  Email: {DEMO_ADMIN['email']}")
            print(f"  Password: {DEMO_ADMIN['password']}")
        
        print("\nSeed completed successfully!")
        
    except Exception as e:
        print(f"Error: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
