"""Built-in preprocessors, processors and evaluators."""
