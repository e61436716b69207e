# brawlers/engine/__init__.py
