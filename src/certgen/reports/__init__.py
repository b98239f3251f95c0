# certgen/reports/__init__.py
