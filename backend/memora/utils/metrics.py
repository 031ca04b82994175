# /memora/utils/metrics.py

from prometheus_client import Counter, Histogram

# All Prometheus metrics of the assistant, exposed on GET /metrics.

# Turn pipeline
turns_counter = Counter('assistant_turns_total', 'User turns processed', ['kind'])
turn_latency_histogram = Histogram('assistant_turn_latency_seconds', 'Time spent processing one turn', ['kind'])
intents_counter = Counter('assistant_intents_total', 'Intents classified', ['category'])
permission_denials_counter = Counter('assistant_permission_denials_total', 'Actions rejected by the permission gate', ['action'])

# Flows and dispatch
flow_transitions_counter = Counter('assistant_flow_transitions_total', 'Guided flow transitions', ['action', 'outcome'])
dispatch_counter = Counter('assistant_dispatch_total', 'Action dispatch outcomes', ['action', 'status'])
commands_counter = Counter('assistant_commands_total', 'Slash commands executed', ['command', 'status'])

# Persistence
history_operations = Counter('assistant_history_operations_total', 'History and analytics store operations', ['operation', 'status'])
