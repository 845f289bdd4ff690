"""Build the annotation plan of a live instance from the engine REST API."""

import asyncio
import sys

from flowtrace import DiagramSession, get_history_source, load_config


async def main(instance_id: str):
    # Reads flowtrace.yaml and FLOWTRACE_ENGINE_* overrides
    config = load_config()
    source = get_history_source("http", config)

    async with source:
        session = DiagramSession(source, instance_id)
        plan = await session.refresh()

    print(f"📍 Active node: {plan.active_node}")
    for element_id, state in plan.edge_states.items():
        print(f"   {element_id}: {state.value}")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "example-instance"))
