"""auth/ -- Local authentication core for LocalAuth.

Layer rule: auth/ imports only stdlib, storage/ and core/.
main.py imports from auth/, not the other way around.
"""
