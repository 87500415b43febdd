class ConfigurationError(ValueError):
    """
    Ungültige Formatierer-Konfiguration (z.B. decimal_places ausserhalb 0..4
    oder unbekannte Symbolposition). Wird nie stillschweigend korrigiert.
    """
