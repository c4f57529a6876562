import os
import sys
from pathlib import Path
import logging as lg

import click

from sm.common.hwconf import CAPACITY, WORD_SIZE
from sm.common.ops import Op
from sm.common.errors import MachineError, ImageError
from sm.common.settings import RunSettings
from sm.runtime.mmu import MMU
from sm.runtime.peripheral import Peripherals
from sm.loader.program import Program, demo_program, halt_sequence
from sm.loader.image import load_image
import sm.runtime.cpu as cpu


EXIT_HALT = 0
EXIT_EXEC_ERROR = 1
EXIT_KEYBOARD = 3


def init_memory(memory: MMU, program: Program):
    memory.load(program.words)


def create_machine(
    program: Program,
    pp: Peripherals | None = None,
    settings: RunSettings | None = None
) -> cpu.CPU:
    if settings is None:
        settings = RunSettings()

    if pp is None:
        pp = Peripherals()

    memory = MMU(settings.capacity)
    init_memory(memory, program)
    return cpu.CPU(memory, pp, program.start)


def execute(
    program: Program,
    pp: Peripherals | None = None,
    settings: RunSettings | None = None
):
    ''' Runs the program until it halts; cpu.Halt signals success '''
    proc = create_machine(program, pp, settings)

    while True:
        proc.exec_next()


def reference(capacity: int = CAPACITY) -> str:
    lines = [f'0x{op.value:X} = {op.name}' for op in Op]

    halt = halt_sequence(0)

    lines.extend([
        'To halt program, jump to current position:',
        '',
        f'0x0 {Op(halt[0]).name} 0x{halt[1]:X}',
        f'0x{halt[1]:X} {Op(halt[2]).name}',
        '',
        f'Word size is {WORD_SIZE} bytes',
        f'Memory capacity is {capacity} words',
    ])

    return '\n'.join(lines)


def settings_from_env() -> RunSettings:
    settings = RunSettings()
    trace = os.environ.get('SM_TRACE', '')
    capacity = os.environ.get('SM_CAPACITY')

    settings.update(
        trace=trace.lower() in ('1', 'true', 'yes', 'on'),
        capacity=int(capacity) if capacity else None
    )

    return settings


@click.command(
    context_settings={'ignore_unknown_options': True, 'help_option_names': []}
)
@click.argument('args', nargs=-1, type=click.UNPROCESSED)
def run(args: tuple[str, ...]):
    ''' sm [IMAGE]: run IMAGE, or the built-in demo; any flag prints the reference '''
    try:
        settings = settings_from_env()
    except (ValueError, UserWarning) as e:
        raise click.UsageError(f'Bad SM_CAPACITY: {e}')

    if any(arg.startswith('-') for arg in args):
        click.echo(reference(settings.capacity))
        sys.exit(EXIT_HALT)

    if len(args) > 1:
        raise click.UsageError('At most one image may be given')

    lg.basicConfig(level=settings.log_level())
    lg.getLogger().setLevel(settings.log_level())
    lg.info("SM")

    try:
        program = load_image(Path(args[0])) if args else demo_program()
        execute(program, settings=settings)

    except cpu.Halt:
        lg.info('Execution halted gracefully')
        sys.exit(EXIT_HALT)

    except (MachineError, ImageError) as e:
        lg.error(f'Execution halted on error: {e}')
        sys.exit(EXIT_EXEC_ERROR)

    except KeyboardInterrupt:
        lg.info('Execution halted by the user')
        sys.exit(EXIT_KEYBOARD)


if __name__ == '__main__':
    run()
