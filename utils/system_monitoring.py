#!/usr/bin/env python3
"""
System Monitoring Module

Snapshots of process resource usage, logged around long-running operations
such as model training. Monitoring is synchronous: snapshots are taken when
an operation starts and stops, never from a background thread.
"""

import os
import time
import threading
import psutil
from datetime import datetime


class ResourceMonitor:
    """
    Captures memory and CPU usage of the current process and logs it.
    """

    def __init__(self, logger):
        """
        Initialize the resource monitor.

        Args:
            logger: Logger instance for recording resource metrics
        """
        self.logger = logger
        self.process = psutil.Process(os.getpid())

        self.current_operation = None
        self.operation_start_time = None

    def get_resource_usage(self):
        """
        Get resource usage statistics for the current process.

        Returns:
            dict: Memory, CPU and thread metrics
        """
        memory_info = self.process.memory_info()
        system_memory = psutil.virtual_memory()

        return {
            "timestamp": datetime.now().isoformat(),
            "memory": {
                "current_mb": memory_info.rss / (1024 * 1024),
                "system_percent_used": system_memory.percent
            },
            "cpu": {
                # Non-blocking: percentage since the previous call
                "process_percent": self.process.cpu_percent(interval=None),
                "logical_cores": psutil.cpu_count(logical=True)
            },
            "threads": threading.active_count(),
            "process_id": self.process.pid
        }

    def start(self, operation_name=None):
        """
        Mark the start of an operation and log the initial resource usage.

        Args:
            operation_name (str, optional): Name of the operation being monitored
        """
        self.current_operation = operation_name
        self.operation_start_time = time.time()

        self.logger.debug(f"Resource monitoring started for operation: {operation_name}", extra={
            "metrics": self.get_resource_usage()
        })

    def stop(self):
        """
        Mark the end of the current operation and log the final resource usage.

        Returns:
            float or None: Duration of the operation in seconds, or None if
            no operation was started
        """
        if self.operation_start_time is None:
            return None

        duration = time.time() - self.operation_start_time

        self.logger.debug("Resource monitoring stopped", extra={
            "metrics": {
                "operation": self.current_operation,
                "duration": duration,
                "resources": self.get_resource_usage()
            }
        })

        self.current_operation = None
        self.operation_start_time = None
        return duration
