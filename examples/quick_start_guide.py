#!/usr/bin/env python3
"""
Quick Start Guide for the Fuzzy XML Parser.

Parses a typical model response that mixes prose with loosely written tags,
then shows the recovery report and the available output formats.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fuzzy_xml import FuzzyXMLParser, ParserConfig, parse
from fuzzy_xml.api import to_json, to_text, to_xml


LLM_RESPONSE = """Here is the summary of our findings:
<findings>
  The indemnification clause is overly broad.
  <details>This could expose us to significant risks.</details>
  Additionally, the limitation of liability is insufficient.
</findings>
Please review these points at your earliest convenience.
<recommendations>
  <item>Narrow the indemnification clause
  <item>Raise the liability cap if 2 < 3
"""


def quick_start_example():
    """Quick start example showing basic usage."""

    print("🚀 QUICK START - Fuzzy XML Parser")
    print("=" * 40)

    # Step 1: Parse with the bare parser class
    print("\n📄 Step 1: Parsing a model response")
    print("-" * 30)

    nodes = FuzzyXMLParser(LLM_RESPONSE).parse()
    for node in nodes:
        label = "text" if node.is_text else f"<{node.tag_name}>"
        print(f"  {label}: {node.content[:50]!r} ({len(node.children)} children)")

    # Step 2: Full result with recoveries and diagnostics
    print("\n🔍 Step 2: Recovery report")
    print("-" * 30)

    result = parse(LLM_RESPONSE, correlation_id="quick-start")
    print(f"  Success: {result.success}")
    print(f"  Well formed: {result.is_well_formed}")
    for event in result.recoveries:
        print(f"  @{event.position}: {event.message}")

    items = result.find_all("item")
    print(f"  Items found: {[item.content for item in items]}")


def output_formats_example():
    """Example showing different output formats."""

    print("\n\n🔄 OUTPUT FORMATS EXAMPLE")
    print("=" * 35)

    nodes = parse("Intro <answer>42<why>it just is</why></answer>",
                  config=ParserConfig.quiet()).nodes

    formats = [
        ("JSON", to_json(nodes, indent=None)),
        ("Outline", to_text(nodes)),
        ("XML", to_xml(nodes, root_tag="response")),
    ]

    for description, output in formats:
        print(f"\n📋 {description}:")
        for line in output.splitlines():
            print(f"  {line}")


def main():
    """Main function."""
    try:
        quick_start_example()
        output_formats_example()

        print("\n✅ All examples completed successfully!")
        return 0

    except Exception as e:
        print(f"\n❌ Example failed: {e}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
