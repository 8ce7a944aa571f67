"""Ingestion layer.

Turns raw push requests into validated, typed batches and per-client
updates. Merging those updates into stored state is the job of
:mod:`cmxpush.state`.
"""

__all__: list[str] = []
