# brawlers/content/__init__.py
