"""Replay an instance history step by step against a recording surface."""

import asyncio

from flowtrace import DiagramSession, InMemorySurface, parse_bpmn
from flowtrace.sources import InMemoryHistorySource

DIAGRAM = """<?xml version="1.0" encoding="UTF-8"?>
<definitions xmlns="http://www.omg.org/spec/BPMN/20100524/MODEL">
  <process id="approval">
    <startEvent id="start" name="Request Submitted"/>
    <sequenceFlow id="f1" sourceRef="start" targetRef="approve"/>
    <userTask id="approve" name="Approve"/>
    <sequenceFlow id="f2" sourceRef="approve" targetRef="end"/>
    <endEvent id="end"/>
  </process>
</definitions>
"""


async def main():
    """Load one instance and walk the replay cursor over it."""
    # Canned engine payloads
    source = InMemoryHistorySource()
    source.add_definition("approval:1:1", DIAGRAM)
    source.add_instance(
        "pi-1",
        [
            {"activityId": "start", "activityType": "startEvent",
             "startTime": "2024-05-01T09:00:00.000+0000", "processDefinitionId": "approval:1:1"},
            {"activityId": "f1", "activityType": "sequenceFlow",
             "startTime": "2024-05-01T09:00:01.000+0000"},
            {"activityId": "approve", "activityType": "userTask", "taskId": "t-1",
             "startTime": "2024-05-01T09:00:01.000+0000"},
        ],
        [{"taskId": "t-1", "taskName": "Approve Travel Request",
          "startTime": "2024-05-01T09:00:01.000+0000"}],
    )

    graph = parse_bpmn(DIAGRAM)
    surface = InMemorySurface(list(graph.nodes) + list(graph.edges))
    session = DiagramSession(source, "pi-1", surface=surface)

    plan = await session.refresh()
    print(f"✅ Loaded {plan.trace_length} history records")

    for cursor in range(plan.trace_length + 1):
        plan = session.set_cursor(cursor)
        print(f"⏩ cursor={cursor} active={plan.active_node} badges={plan.badges}")

    print(f"🏷️ Labels: {surface.labels}")


if __name__ == "__main__":
    asyncio.run(main())
