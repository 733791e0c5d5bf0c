"""Pure reporting core: models, formatting, encoders and the report controller."""
