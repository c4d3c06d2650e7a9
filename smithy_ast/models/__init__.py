"""Shape identifiers, typed shapes and the shape type registry."""
