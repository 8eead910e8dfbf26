from .admin import router as admin_router
from .auth import router as auth_router
from .category import router as category_router
from .comment import router as comment_router
from .post import router as post_router

routes = [
    auth_router,
    post_router,
    category_router,
    comment_router,
    admin_router,
]
