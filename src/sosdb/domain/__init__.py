"""Domain layer: values, objects and the text format that persists them."""
