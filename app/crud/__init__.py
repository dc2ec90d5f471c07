from .crud_table import table
from .crud_user import user
from .crud_menu import menu
from .crud_order import order
from .crud_payment import payment
