"""Policy data model and evaluators."""