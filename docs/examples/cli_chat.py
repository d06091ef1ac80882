import asyncio
import logging

from tool_agent_lib import AgentConfig, AgentEvent, ToolResultEvent, WarningEvent, build_agent, setup_logging
from tool_agent_lib.agent_core import serialize_tool_result


def show_event(event: AgentEvent) -> None:
    """
    Print tool results and warnings as they happen.
    """
    if isinstance(event, ToolResultEvent):
        print(f"  [{event.tool_name}] {serialize_tool_result(event.result)[:200]}")
    elif isinstance(event, WarningEvent):
        print(f"  [warning] {event.message}")


async def main() -> None:
    """
    Main function to run the CLI chat.
    """
    setup_logging(logging.WARNING)
    print("Welcome to the CLI Chat (tool agent)!")

    config = AgentConfig.from_env()
    if not config.has_model_credentials:
        print("TOOL_AGENT_AIPIPE_TOKEN not set. Using the offline stand-in model.")

    async with build_agent(config, on_event=show_event) as session:
        print("\nStart chatting! Type 'exit' or 'quit' to stop.")
        while True:
            user_input = input("\nYou: ").strip()
            if user_input.lower() in ["exit", "quit"]:
                print("Goodbye!")
                break

            if not user_input:
                continue

            try:
                result = await session.run_turn(user_input)
                print(f"Assistant: {result.text}")
            except Exception as e:
                print(f"An error occurred: {e}")


if __name__ == "__main__":
    asyncio.run(main())
