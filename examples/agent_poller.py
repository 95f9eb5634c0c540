import asyncio
import logging
import sys
from typing import Optional

from colorama import Fore, Style

import zagent
from zagent import ZabbixAgent, ZagentError, ZagentNotSupportedError, load_agents, run_with_keyboard_interrupt


class Const:

    CONFIG_FILE = "examples/config.yaml"
    POLL_INTERVAL = 60  # seconds
    QUERY_TIMEOUT = 5   # seconds

    # Keys polled on every agent, in addition to agent.ping
    KEYS = [
        "agent.hostname",
        "agent.version",
        "system.uptime",
        "system.cpu.load[all,avg1]",
    ]


class AgentPoller:
    """Polls a set of Zabbix agents and prints what they report.

    Scheduling, retries and error reporting live here, in the caller; the
    library itself makes exactly one attempt per query.
    """

    def __init__(self, config_path: str = Const.CONFIG_FILE) -> None:
        self.logger = logging.getLogger("AgentPoller")
        self.agents: list[ZabbixAgent] = load_agents(config_path)

    async def query(self, agent: ZabbixAgent, key: str) -> Optional[str]:
        try:
            response = await agent.get(key, timeout=Const.QUERY_TIMEOUT)
        except ZagentNotSupportedError:
            return None
        return response.data_as_string()

    async def poll_agent(self, agent: ZabbixAgent) -> None:
        try:
            alive = await agent.ping(timeout=Const.QUERY_TIMEOUT)
        except (OSError, ZagentError) as e:
            print(Fore.RED + f"{agent.host_port()}: unreachable ({e})" + Style.RESET_ALL)
            return
        if not alive:
            print(Fore.YELLOW + f"{agent.host_port()}: agent.ping did not return 1" + Style.RESET_ALL)
            return

        print(Fore.GREEN + f"{agent.host_port()}: alive" + Style.RESET_ALL)
        for key in Const.KEYS:
            try:
                value = await self.query(agent, key)
            except (OSError, ZagentError) as e:
                self.logger.error(f"{agent.host_port()} {key}: {e}")
                continue
            shown = value if value is not None else Style.DIM + "not supported"
            print(f"  • {key} = {shown}" + Style.RESET_ALL)

    async def run(self, once: bool = False) -> None:
        while True:
            await asyncio.gather(*(self.poll_agent(agent) for agent in self.agents))
            if once:
                return
            await asyncio.sleep(Const.POLL_INTERVAL)


async def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s\t%(levelname)s\t%(name)s\t%(message)s")
    args = [a for a in sys.argv[1:] if a != "--once"]
    once = "--once" in sys.argv[1:]
    config_path = args[0] if args else Const.CONFIG_FILE
    print(f"zagent {zagent.__version__}")
    poller = AgentPoller(config_path)
    await poller.run(once=once)


if __name__ == "__main__":
    run_with_keyboard_interrupt(main)
