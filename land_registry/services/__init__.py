"""Application services layer (stores, submission workflows, notifications).

Services coordinate the remote clients and the domain rules. They should avoid
UI concerns; the notifier is injected.
"""
