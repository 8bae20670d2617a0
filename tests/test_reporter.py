"""
CrashReporter 门面测试。

测试覆盖：
- 按插件键累积崩溃
- 通知事件发布
- 设备消息
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from crash_reporter.device import BaseDevice
from crash_reporter.events import CrashEvent, EventBus, EventTypes
from crash_reporter.models import PersistedState
from crash_reporter.plugin import CrashReporterPlugin
from crash_reporter.reporter import CrashReporter

SERIAL = 'TH1S-15DEV1CE-1D'
IOS_LOG = (
    'Process: Sample [1]\n'
    f'Path:  /Devices/{SERIAL}/data/App Name.app/App Name\n'
    'Exception Type:  EXC_CRASH (SIGABRT)\n'
)
OTHER_IOS_LOG = IOS_LOG.replace(SERIAL, 'TH1S-1598DEV1CE-2D')


class TestCrashReporter(unittest.TestCase):

    def setUp(self):
        self.device = BaseDevice(SERIAL, 'emulator', 'test device', 'iOS')
        self.reporter = CrashReporter(CrashReporterPlugin())
        self.events = []
        for event_type in (EventTypes.CRASH_REPORTED, EventTypes.CRASH_NOTIFICATION):
            self.reporter.event_bus.subscribe(event_type, self.events.append)

    def _types(self):
        return [e.type for e in self.events]

    def test_report_for_selected_device(self):
        self.reporter.select(self.device)
        crash = self.reporter.report_crash(IOS_LOG, 'iOS')
        self.assertEqual(crash.notification_id, '1')
        self.assertEqual(crash.name, 'EXC_CRASH')
        self.assertEqual(self.reporter.plugin_key(), f'{SERIAL}#CrashReporter')
        self.assertEqual(self.reporter.get_state().crashes, [crash])
        self.assertEqual(self._types(), [EventTypes.CRASH_REPORTED, EventTypes.CRASH_NOTIFICATION])
        notification = self.events[1].payload['notification']
        self.assertEqual(notification.title, 'CRASH: EXC_CRASH EXC_CRASH')
        self.assertEqual(notification.message, IOS_LOG)

    def test_other_simulator_is_recorded_without_notification(self):
        self.reporter.select(self.device)
        crash = self.reporter.report_crash(OTHER_IOS_LOG, 'iOS')
        self.assertIsNotNone(crash)
        self.assertEqual(self._types(), [EventTypes.CRASH_REPORTED])

    def test_missing_os_is_dropped(self):
        self.reporter.select(self.device)
        self.assertIsNone(self.reporter.report_crash(IOS_LOG, None))
        self.assertEqual(self.reporter.plugin_states, {})
        self.assertEqual(self.events, [])
        self.assertEqual(self.reporter.plugin.notification_id, 0)

    def test_states_are_kept_per_key(self):
        self.reporter.select(self.device, 'com.example.app')
        self.reporter.report_crash(IOS_LOG, 'iOS')
        self.reporter.report_crash(IOS_LOG, 'iOS', device=None, selected_app=None)
        self.assertEqual(len(self.reporter.get_state().crashes), 1)
        self.assertEqual(len(self.reporter.get_state(None, None).crashes), 1)
        self.assertEqual(
            sorted(self.reporter.plugin_states),
            ['com.example.app#CrashReporter', 'unknown#CrashReporter'],
        )

    def test_previous_state_not_mutated(self):
        self.reporter.select(self.device)
        self.reporter.report_crash(IOS_LOG, 'iOS')
        before = self.reporter.get_state()
        snapshot = list(before.crashes)
        self.reporter.report_crash(IOS_LOG, 'iOS')
        self.assertEqual(before.crashes, snapshot)
        self.assertEqual([c.notification_id for c in self.reporter.get_state().crashes], ['1', '2'])

    def test_default_state_used_before_first_crash(self):
        self.assertIs(self.reporter.get_state(), self.reporter.plugin.default_persisted_state)
        self.assertEqual(self.reporter.get_notifications(), [])

    def test_receive_message(self):
        """来自应用客户端的 crash-report 消息总会通知。"""
        crash = self.reporter.receive_message(
            'crash-report', {'name': 'FATAL EXCEPTION: main', 'reason': 'java.lang.Error', 'callstack': 'cs'},
            device=self.device, selected_app='app',
        )
        self.assertEqual(crash.name, 'FATAL EXCEPTION: main')
        self.assertEqual(self._types(), [EventTypes.CRASH_REPORTED, EventTypes.CRASH_NOTIFICATION])
        self.assertEqual(len(self.reporter.get_notifications(self.device, 'app')), 1)

    def test_receive_unknown_message(self):
        self.assertIsNone(self.reporter.receive_message('ping', {}))
        self.assertEqual(self.events, [])


class TestEventBus(unittest.TestCase):

    def test_failing_handler_does_not_block_others(self):
        bus = EventBus()
        received = []

        def broken(event):
            raise RuntimeError('boom')

        bus.subscribe('x', broken)
        bus.subscribe('x', received.append)
        with self.assertLogs('crash_reporter.events', level='ERROR'):
            delivered = bus.publish(CrashEvent('x', {}))
        self.assertEqual(delivered, 1)
        self.assertEqual(len(received), 1)

    def test_unsubscribe(self):
        bus = EventBus()
        received = []
        bus.subscribe('x', received.append)
        bus.unsubscribe('x', received.append)
        bus.publish(CrashEvent('x', {}))
        self.assertEqual(received, [])

    def test_subscribe_returns_unsubscribe(self):
        bus = EventBus()
        received = []
        cancel = bus.subscribe('x', received.append)
        cancel()
        cancel()
        self.assertEqual(bus.publish(CrashEvent('x')), 0)
        self.assertEqual(received, [])

    def test_handler_unsubscribing_during_publish(self):
        """处理器在发布过程中取消订阅，不影响本次其余处理器。"""
        bus = EventBus()
        received = []
        cancel = None

        def once(event):
            cancel()

        cancel = bus.subscribe('x', once)
        bus.subscribe('x', received.append)
        self.assertEqual(bus.publish(CrashEvent('x')), 2)
        self.assertEqual(bus.publish(CrashEvent('x')), 1)
        self.assertEqual(len(received), 2)


if __name__ == '__main__':
    unittest.main()
