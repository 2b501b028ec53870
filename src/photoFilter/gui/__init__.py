"""Qt glue that drives the filter engine from an interactive editor."""
