"""
minifeed.api.routers

HTTP routers: public (health, login, register) and protected (users, posts, feed).
"""
