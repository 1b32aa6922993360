def get_table_name(table_name: str, settings) -> str:
    """
    Get the appropriate table name based on the environment.

    Args:
        table_name: Base table name
        settings: Application settings containing environment info

    Returns:
        The base name, or when environment suffixes are enabled:
        - For development and staging: {table_name}_dev
        - For production: {table_name}_prod
    """
    if not settings.use_environment_table_suffix:
        return table_name
    # Use _dev suffix for both development and staging environments
    suffix = "_prod" if settings.environment == "production" else "_dev"
    return f"{table_name}{suffix}"
