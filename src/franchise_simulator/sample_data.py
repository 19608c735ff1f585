from __future__ import annotations

from .models.parameters import ParameterSet


def build_default_parameters() -> ParameterSet:
    return ParameterSet(
        tax_rate=0.06,
        cogs_rate=0.60,
        loss_rate=0.04,
        resupply_rate=0.02,
        royalty_rate=0.05,
        other_repasses_rate=0.035,
        card_fee_rate=0.02,
        marketing_rate=0.02,
        system_fee_per_store=150.0,
        accounting_fee=500.0,
        franchise_fee=30000.0,
        capex_per_store=20000.0,
        revenue_per_store=15000.0,
        growth_factor=1.01,
        flat_profit_per_store=1500.0,
    )
