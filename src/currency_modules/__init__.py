from .currency_formatter import CurrencyFormatter
from .currency_bootstrap import current_formatter, formatter_for_user, use_formatter, user_currency_scope
from .errors import ConfigurationError
from .utils import normalize_amount, number_format
