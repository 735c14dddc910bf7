from move_cli.commands.errmap import Errmap
from move_cli.commands.new import New
from move_cli.commands.package import Build, Coverage, Disassemble, Info, Prove
from move_cli.commands.unit_test import Test

LEAF_COMMANDS = (Build, Coverage, Disassemble, Errmap, Info, New, Prove, Test)

__all__ = [
    "Build",
    "Coverage",
    "Disassemble",
    "Errmap",
    "Info",
    "New",
    "Prove",
    "Test",
    "LEAF_COMMANDS",
]
