# brawlers/__init__.py
from .content.balance import DEFAULTS
from .routes import brawl_bp
from .sockets import register_brawl_socket_handlers


def init_brawl(app, socketio):
    settings = {
        "auto_battle_delay": float(app.config.get("BRAWL_AUTO_BATTLE_DELAY", DEFAULTS["auto_battle_delay"])),
        "flavor": app.config.get("BRAWL_FLAVOR_SOURCE"),
    }
    app.register_blueprint(brawl_bp)
    register_brawl_socket_handlers(socketio, settings)
