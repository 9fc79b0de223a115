import os

from rich.pretty import pprint

from commandeer import *


class Greet(Command):
    name = "greet"
    descr = "Greet a user with their name"
    args = (
        argument("name", descr="The name of the person you want to greet"),
        argument("age", required=False),
    )
    flags = (
        flags.string("entrypoint", descr="The main HTML file that will be requested"),
        flags.array("fragment", alias="f", descr="HTML fragments loaded on demand"),
    )

    async def handle(self):
        pprint(self)


class MakeController(Command):
    name = "make:controller"
    descr = "Create a HTTP controller"


class MakeModel(Command):
    name = "make:model"
    descr = "Create database model"

    async def handle(self):
        print(os.environ.get("NODE_ENV"))


kernel = Kernel().register([Greet, MakeController, MakeModel])

kernel.flag("env", lambda value, parsed, command: os.environ.update(NODE_ENV=value), type="string", descr="The environment to use to specialize certain commands")
kernel.flag("help", lambda value, parsed, command: (
    printhelpfor(command, kernel.flags.values()) if command else printhelp(kernel.commands.values(), kernel.flags.values())
), alias="h", descr="Show help")


if __name__ == '__main__':
    invoke(kernel)
