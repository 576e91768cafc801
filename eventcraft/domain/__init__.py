"""Domain layer for eventcraft.

Pure models and rules, no I/O:

- template: immutable blueprints and authoring checks
- event: live events, modules and progress aggregation
- task: task instances and the dependency state machine
- access: roles and the field allow-list
- shared: Result monad, error taxonomy, domain events
"""
