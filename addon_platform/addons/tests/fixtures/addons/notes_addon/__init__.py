# Lifecycle calls, in order
calls = []


def initialize():
    calls.append('initialize')


def cleanup():
    calls.append('cleanup')
