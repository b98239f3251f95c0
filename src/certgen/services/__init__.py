# certgen/services/__init__.py
