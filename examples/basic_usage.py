#!/usr/bin/env python3
"""
Basic usage example for the dpservice client.

Demonstrates:
- Connecting to dpservice and initializing it
- Creating an interface, a route and a firewall rule
- Handling status errors (ALREADY_EXISTS, NOT_FOUND)
- Querying NAT info
"""

import logging

from dpservice import (
    DPServiceClient,
    FirewallRule,
    FirewallRuleMeta,
    FirewallRuleSpec,
    Interface,
    InterfaceMeta,
    InterfaceSpec,
    Route,
    RouteMeta,
    RouteNextHop,
    RouteSpec,
    ServerError,
    config,
    errors,
    ignore_status_error_code,
)


def main():
    """
    Basic example: set up one interface and inspect the result.
    """
    logging.basicConfig(level=config.LOG_LEVEL)

    print("=" * 60)
    print("dpservice client - Basic Usage Example")
    print("=" * 60)

    # 1. Connect
    print(f"\n[1] Connecting to dpservice at {config.ADDRESS}...")
    with DPServiceClient() as client:
        initialized = client.initialize()
        version = client.get_version()
        print(f"✓ dpservice {version.spec.service_version} initialized: {initialized.spec.uuid}")

        # 2. Create an interface
        print("\n[2] Creating interface vm4...")
        try:
            iface = client.create_interface(Interface(
                metadata=InterfaceMeta(id="vm4"),
                spec=InterfaceSpec(vni=200, device="net_tap5", ips=["10.200.1.4", "2000:200:1::4"]),
            ))
            print(f"✓ Interface {iface.name} created")
            print(f"  - Underlay route: {iface.spec.underlay_route}")
            print(f"  - Virtual function: {iface.spec.virtual_function}")
        except ServerError as e:
            if ignore_status_error_code(e, errors.ALREADY_EXISTS):
                raise
            print(f"✓ Interface vm4 already exists ({e})")

        # 3. Route a prefix of VNI 200 to a remote node
        print("\n[3] Adding route...")
        route = client.add_route(Route(
            metadata=RouteMeta(vni=200),
            spec=RouteSpec(prefix="10.100.3.0/24", next_hop=RouteNextHop(vni=0, ip="fc00:2::64:0:1")),
        ))
        print(f"✓ Route {route.name} added")

        # 4. Allow inbound traffic
        print("\n[4] Adding firewall rule...")
        rule = client.add_firewall_rule(FirewallRule(
            metadata=FirewallRuleMeta(interface_id="vm4"),
            spec=FirewallRuleSpec(
                rule_id="fr1",
                traffic_direction="ingress",
                firewall_action="accept",
                priority=1000,
                ip_version="ipv4",
                source_prefix="0.0.0.0/0",
                destination_prefix="10.200.1.4/32",
            ),
        ))
        print(f"✓ Rule {rule.name}: {rule.spec.traffic_direction}/{rule.spec.firewall_action}")

        # 5. NAT info
        print("\n[5] NAT entries behind 10.20.30.40...")
        nats = client.get_nat_info("10.20.30.40", "any")
        for nat in nats.items:
            print(f"  - {nat}")

        # 6. Print the interface as JSON
        print("\n[6] Interface JSON:")
        print(client.get_interface("vm4").model_dump_json(by_alias=True, indent=2))

    print("\n" + "=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
