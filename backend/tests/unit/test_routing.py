"""Tests for how API endpoints are mounted."""
import inspect

from fastapi.routing import APIRoute


class TestEndpoints:
    """Test endpoint declarations."""
    
    def test_api_endpoints_run_in_threadpool(self):
        """Test hashing and database endpoints are sync so they stay off the event loop."""
        from hms.main import app
        
        routes = [r for r in app.routes if isinstance(r, APIRoute) and r.path.startswith("/api/v1")]
        
        assert routes
        coroutines = [r.path for r in routes if inspect.iscoroutinefunction(r.endpoint)]
        assert coroutines == []
    
    def test_every_resource_is_mounted(self):
        """Test each router is reachable under the API prefix."""
        from hms.main import app
        
        paths = {r.path for r in app.routes if isinstance(r, APIRoute)}
        
        for path in (
            "/api/v1/auth/login",
            "/api/v1/users/{user_id}/status",
            "/api/v1/roles/{role_id}/menus/{menu_id}",
            "/api/v1/companies/current/branches",
            "/api/v1/health/ready",
        ):
            assert path in paths
