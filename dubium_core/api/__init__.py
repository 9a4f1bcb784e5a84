"""HTTP helpers and non-auth blueprints for Dubium Core."""
