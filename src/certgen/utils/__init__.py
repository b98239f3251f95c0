# certgen/utils/__init__.py
