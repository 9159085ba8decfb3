"""
Waymark - sample application

Demonstrates routes, groups, filters and reverse routing served over ASGI.
Run with: uvicorn sample:app --reload
"""

import logging

from waymark import JSONResponse, Router, RouterApp

# =============================================================================
# Application Setup
# =============================================================================

logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s %(levelname)-8s %(name)s  %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S%z",
)
logger = logging.getLogger("waymark.sample")

router = Router(config={"base_url": "http://localhost:8000"})

# In-memory storage for the demo
USERS: dict[str, dict[str, str]] = {
    "1": {"id": "1", "name": "Alice"},
    "2": {"id": "2", "name": "Bob"},
}


# =============================================================================
# Controllers
# =============================================================================

class UserController:
    """CRUD controller registered with ``router.crud``."""

    def many(self):
        return list(USERS.values())

    def one(self, user_id):
        return USERS.get(user_id) or router.trigger_not_found()

    def create(self):
        return JSONResponse({"created": True}, status_code=201)

    def update(self, user_id):
        return {"updated": user_id}

    def delete(self, user_id):
        USERS.pop(user_id, None)
        return None


# =============================================================================
# Filters
# =============================================================================

def log_api_access(*_args):
    """Runs before every API route; returning a value would end the request."""
    logger.info("API access")
    return None


router.add_filter("api", log_api_access)
router.on_not_found(lambda: JSONResponse({"error": "Not Found"}, status_code=404))


# =============================================================================
# Routes
# =============================================================================

router.get("/", lambda: {
    "message": "Welcome to Waymark!",
    "users": router.get_route("users.many", use_base_url=True),
}, {"name": "home"})

router.get("/hello/(:alpha)?", lambda name="World": f"Hello, {name}!", {"name": "hello"})
router.redirect("/hi", "/hello", {"status": 301})


def api_routes(r: Router) -> None:
    r.crud("/users", UserController, {"name": "users"})
    r.get("/files/(:all)", lambda path: {"path": path}, {"name": "file"})


router.group({"prefix": "/api", "before": "api"}, api_routes)

app = RouterApp(router)


if __name__ == "__main__":
    app.run()
