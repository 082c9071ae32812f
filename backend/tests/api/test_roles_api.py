"""Tests for the /roles endpoints."""
import pytest

API = "/api/v1/roles"


@pytest.fixture
def nurse_role_id(catalog):
    from hms.models import Role
    
    return catalog.query(Role).filter(Role.role_name == "Nurse").one().id


@pytest.fixture
def dashboard_menu_id(catalog):
    from hms.models import Menu
    
    return catalog.query(Menu).filter(Menu.menu_name == "Dashboard").one().id


class TestRoleCatalog:
    """Test role reads and writes."""
    
    def test_list_roles(self, client, company_admin, bearer):
        """Test the seeded roles are listed by name."""
        response = client.get(API, headers=bearer(company_admin["token"]))
        
        assert response.status_code == 200
        names = [r["role_name"] for r in response.json()["data"]]
        assert names == sorted(names)
        assert {"Administrator", "Doctor", "Nurse", "Receptionist"} <= set(names)
    
    def test_create_role(self, client, company_admin, bearer):
        """Test an administrator can add a role."""
        response = client.post(
            API,
            headers=bearer(company_admin["token"]),
            json={"role_name": "Pharmacist", "role_description": "Dispensary"},
        )
        
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["role_name"] == "Pharmacist"
        assert data["is_active"] is True
    
    def test_create_duplicate_role(self, client, company_admin, bearer):
        """Test role names are unique."""
        response = client.post(API, headers=bearer(company_admin["token"]), json={"role_name": "Nurse"})
        
        assert response.status_code == 409
        assert response.json()["message"] == "Role with this name already exists"
    
    def test_get_unknown_role(self, client, company_admin, bearer):
        """Test a missing role is a 404."""
        response = client.get(f"{API}/9999", headers=bearer(company_admin["token"]))
        
        assert response.status_code == 404
        assert response.json()["message"] == "Role not found"
    
    def test_delete_assigned_role(self, client, company_admin, bearer):
        """Test a role held by a user cannot be deleted."""
        role_id = company_admin["user"]["role"]["id"]
        
        response = client.delete(f"{API}/{role_id}", headers=bearer(company_admin["token"]))
        
        assert response.status_code == 409
    
    def test_delete_unassigned_role(self, client, company_admin, nurse_role_id, bearer):
        """Test an unused role is removed."""
        headers = bearer(company_admin["token"])
        
        response = client.delete(f"{API}/{nurse_role_id}", headers=headers)
        
        assert response.status_code == 200
        assert client.get(f"{API}/{nurse_role_id}", headers=headers).status_code == 404


class TestMenuRights:
    """Test the role menu tree and rights updates."""
    
    def test_admin_menu_tree(self, client, company_admin, bearer):
        """Test the onboarded admin role holds every right."""
        role_id = company_admin["user"]["role"]["id"]
        
        response = client.get(f"{API}/{role_id}/menus", headers=bearer(company_admin["token"]))
        
        assert response.status_code == 200
        nodes = response.json()["data"]
        assert [n["menu_name"] for n in nodes] == ["Dashboard", "Users", "Roles", "Settings"]
        assert all(n["rights"]["can_delete"] for n in nodes)
    
    def test_set_menu_rights(self, client, company_admin, nurse_role_id, dashboard_menu_id, bearer):
        """Test rights are stored and reflected in the tree."""
        headers = bearer(company_admin["token"])
        
        response = client.put(
            f"{API}/{nurse_role_id}/menus/{dashboard_menu_id}",
            headers=headers,
            json={"can_view": True},
        )
        
        assert response.status_code == 200
        tree = client.get(f"{API}/{nurse_role_id}/menus", headers=headers).json()["data"]
        rights = {n["menu_name"]: n["rights"] for n in tree}
        assert rights["Dashboard"] == {
            "can_view": True, "can_create": False, "can_edit": False, "can_delete": False,
        }
        assert rights["Users"]["can_view"] is False
    
    def test_set_rights_unknown_menu(self, client, company_admin, nurse_role_id, bearer):
        """Test an unknown menu is a 404."""
        response = client.put(
            f"{API}/{nurse_role_id}/menus/9999",
            headers=bearer(company_admin["token"]),
            json={"can_view": True},
        )
        
        assert response.status_code == 404
        assert response.json()["message"] == "Menu not found"
    
    def test_non_admin_cannot_set_rights(
        self, client, company_admin, nurse_role_id, dashboard_menu_id, register_payload, bearer
    ):
        """Test rights changes need an administrator."""
        client.post(
            "/api/v1/users",
            headers=bearer(company_admin["token"]),
            json=register_payload(role_id=nurse_role_id),
        )
        login = client.post(
            "/api/v1/auth/login",
            json={"email": "newuser", "password": register_payload()["password"]},
        )
        
        response = client.put(
            f"{API}/{nurse_role_id}/menus/{dashboard_menu_id}",
            headers=bearer(login.json()["data"]["token"]),
            json={"can_view": True, "can_edit": True},
        )
        
        assert response.status_code == 403
