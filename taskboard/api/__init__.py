# taskboard/api/__init__.py
