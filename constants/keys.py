class UIKeys:
    """Keys for UI widgets in ``st.session_state``."""

    SHIPPING_TYPE = "ui.quote.shipping_type"
    SEA_FREIGHT_MODE = "ui.quote.sea_freight_mode"
    SHIPPING_DATE = "ui.quote.shipping_date"
    ORIGIN = "ui.quote.origin"
    DESTINATION = "ui.quote.destination"
    CONTAINER_COUNT_PREFIX = "ui.quote.container_count."
    NUMBER_OF_PACKAGES = "ui.quote.number_of_packages"
    GROSS_WEIGHT = "ui.quote.gross_weight_kg"
    VOLUME = "ui.quote.volume_cbm"
    CARGO_CATEGORY = "ui.quote.cargo_type_category"
    CARGO_TYPE = "ui.quote.cargo_type"
    START_OVER = "ui.quote.start_over"


class StateKeys:
    """Keys for data stored in ``st.session_state``."""

    QUOTE_REQUIREMENT = "quote.requirement"
    QUOTE_RESULTS = "quote.results"
    SESSION_ID = "session_id"
