"""
Application layer package - Hexagonal Architecture INSIDE Django.

Sub-packages:
- advent_gate: date-gated release of daily adventures

Usage:
    from api.application.advent_gate.wiring import get_daily_adventure_uc

    use_case = get_daily_adventure_uc()
    adventure = use_case.execute(request)
"""
