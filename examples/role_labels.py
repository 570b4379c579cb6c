"""
Example usage of label families sharing one store.

Role, BillingFrequency and TaxFrequency rows all live in a single
``labels`` collection and are told apart by their ``type`` attribute.
"""

from acts_as_label import InMemoryLabelStore, Label, LabelRegistry, LabelService


class Role(Label):
    """Role labels; the default role is picked in code."""


class BillingFrequency(Label):
    """Billing frequencies; the default is the first row."""


class TaxFrequency(Label):
    """Tax frequencies; may reuse the billing system labels."""


def main() -> None:
    """Example usage of scoped label families."""
    registry = LabelRegistry(InMemoryLabelStore())
    service = LabelService(registry)

    registry.configure(
        Role,
        collection="labels",
        scope={"type": "Role"},
        default_resolver=lambda registry: registry.resolve(Role, "GUEST"),
    )
    for family in (BillingFrequency, TaxFrequency):
        registry.configure(family, collection="labels", scope={"type": family.__name__})

    service.seed(
        Role,
        [
            {"system_label": "SUPERUSER", "label": "Admin"},
            {"system_label": "EMPLOYEE", "label": "Employee"},
            {"system_label": "GUEST", "label": "Guest"},
        ],
    )
    for family in (BillingFrequency, TaxFrequency):
        service.seed(
            family,
            [
                {"system_label": "MONTHLY", "label": "Monthly"},
                {"system_label": "QUARTERLY", "label": "Quarterly"},
                {"system_label": "YEARLY", "label": "Yearly"},
            ],
        )

    roles = registry.family(Role)
    print(f"roles.superuser: {roles.superuser} ({roles.superuser.to_symbol()})")
    print(f"Role default: {registry.default(Role)}")
    print(f"BillingFrequency default: {registry.default(BillingFrequency)}")

    # Same system label, different families
    billing = registry.resolve(BillingFrequency, "monthly")
    tax = registry.resolve(TaxFrequency, "monthly")
    print(f"Billing MONTHLY type={billing.type}, Tax MONTHLY type={tax.type}")

    # Labels can change; system labels cannot
    service.update(billing, label="Every month")
    print(f"Updated label: {registry.resolve(BillingFrequency, 'MONTHLY')}")


if __name__ == "__main__":
    main()
