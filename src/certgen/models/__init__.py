# certgen/models/__init__.py
