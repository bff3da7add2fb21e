"""
Colored logging utility for network-specific loggers.
Provides colored console output and a per-network prefix for deployment logs.
"""

import logging
import sys
from typing import Dict, Optional
from dataclasses import dataclass

from colorama import init, Fore, Style

init(autoreset=True)


@dataclass
class NetworkColors:
    """Color scheme for a specific network"""
    primary: str
    accent: str


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to log messages based on network"""

    def __init__(self, network_colors: NetworkColors, network_name: str, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.network_colors = network_colors
        self.network_name = network_name

        # Level-based colors
        self.level_colors = {
            logging.DEBUG: Fore.WHITE,
            logging.INFO: self.network_colors.primary,
            logging.WARNING: Fore.YELLOW,
            logging.ERROR: Fore.RED,
            logging.CRITICAL: Fore.RED + Style.BRIGHT,
        }

    def format(self, record):
        color = self.level_colors.get(record.levelno, Fore.WHITE)
        formatted = super().format(record)

        network_prefix = f"[{self.network_colors.accent}{self.network_name}{Fore.RESET}]"
        return f"{network_prefix} {color}{formatted}{Fore.RESET}"


class NetworkLoggerManager:
    """Manages colored loggers for different networks"""

    # Local networks are green, live ones stand out
    LOCAL_COLORS = NetworkColors(primary=Fore.GREEN, accent=Fore.GREEN + Style.BRIGHT)
    COLOR_SCHEMES = [
        NetworkColors(primary=Fore.CYAN, accent=Fore.CYAN + Style.BRIGHT),
        NetworkColors(primary=Fore.MAGENTA, accent=Fore.MAGENTA + Style.BRIGHT),
        NetworkColors(primary=Fore.BLUE, accent=Fore.BLUE + Style.BRIGHT),
    ]
    LOCAL_NETWORKS = ("hardhat", "localhost")

    def __init__(self):
        self.loggers: Dict[str, logging.Logger] = {}
        self.color_index = 0

    def _colors_for(self, network_name: str) -> NetworkColors:
        if network_name in self.LOCAL_NETWORKS:
            return self.LOCAL_COLORS
        colors = self.COLOR_SCHEMES[self.color_index % len(self.COLOR_SCHEMES)]
        self.color_index += 1
        return colors

    def get_network_logger(self, network_name: str, fmt: Optional[str] = None) -> logging.Logger:
        """
        Get or create a colored logger for a specific network

        Args:
            network_name: Configured network name, e.g. polygonTestnet
            fmt: Optional log format, defaults to the standard format

        Returns:
            Configured logger with colored output
        """
        if network_name in self.loggers:
            return self.loggers[network_name]

        logger = logging.getLogger(f"deployment.{network_name}")

        # Remove existing handlers to avoid duplicates
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

        # stdout is reserved for progress lines
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(ColoredFormatter(
            network_colors=self._colors_for(network_name),
            network_name=network_name,
            fmt=fmt or '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        logger.addHandler(console_handler)
        # The network prefix already marks these lines, keep them out of the root handler
        logger.propagate = False

        self.loggers[network_name] = logger
        return logger


# Global instance
_network_logger_manager = NetworkLoggerManager()


def get_network_logger(network_name: str, fmt: Optional[str] = None) -> logging.Logger:
    """Get a colored logger for a specific network"""
    return _network_logger_manager.get_network_logger(network_name, fmt)


def setup_root_logger(level: str = "WARNING", format_string: Optional[str] = None):
    """Setup the root logger with basic configuration"""
    if format_string is None:
        format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=format_string,
        stream=sys.stderr
    )
