from .pages import pages_bp
from .checkout import checkout_bp
from .admin import admin_bp
