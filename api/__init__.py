"""Flask adapter for the finance tracker."""
