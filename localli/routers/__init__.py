# localli/routers/__init__.py
