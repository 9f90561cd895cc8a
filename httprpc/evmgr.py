
#
# httprpc - Copyright (C) HTTP-RPC contributors.
#
# This library is free software; you can redistribute it and/or
# modify it under the terms of the GNU Lesser General Public
# License as published by the Free Software Foundation; either
# version 2.1 of the License, or (at your option) any later version.
#
# This library is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
# Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this library; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA  02110-1301
#


class EventManager(object):
    """A minimal event system for hooking code into serialization, e.g. for
    timing or logging every response.

    Handlers run in the order they were added. Adding a handler twice does not
    make it run twice.
    """

    def __init__(self, parent, handlers=None):
        """
        :param parent: The owner of this event manager.
        :param handlers: A dict of event name/list of callables pairs. It is
            copied to the new instance.
        """

        self.parent = parent
        self.handlers = {}

        if handlers is not None:
            for k, v in handlers.items():
                for h in v:
                    self.add_listener(k, h)

    def add_listener(self, event_name, handler):
        handlers = self.handlers.setdefault(event_name, [])
        if not handler in handlers:
            handlers.append(handler)

    def del_listener(self, event_name, handler=None):
        if handler is None:
            del self.handlers[event_name]
        else:
            self.handlers[event_name].remove(handler)

    def fire_event(self, event_name, ctx, *args, **kwargs):
        """Runs all the handlers of the given event with the given context
        object."""

        for handler in tuple(self.handlers.get(event_name, ())):
            handler(ctx, *args, **kwargs)
