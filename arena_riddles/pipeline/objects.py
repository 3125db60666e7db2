"""
Object Factories
================

Builders for the PlacedObjects shared by the puzzle variants. Every builder
sets ``type`` first; the remaining properties follow in the order the
engine documents them.
"""

from typing import List, Optional, Tuple

from arena_riddles.core.definitions import (
    DEFAULT_ENEMY_TYPE,
    GATE_TILE_ID,
    PLAYER_HEIGHT_PX,
    PLAYER_WIDTH_PX,
    PUZZLE_TYPE_CIPHER,
    TILE_SIZE,
    ObjectType,
)
from arena_riddles.core.models import Arena, GateDescriptor, PlacedObject

FINALE_PROMPT = "FINAL TERMINAL: Decrypt the message. Enter the plaintext (A-Z only)."
VIGENERE_HINT = "Vigenere. Use the key shown (A=0..Z)."


def typed(name: str, object_type: ObjectType, tile_x: int, tile_y: int,
          width: float = TILE_SIZE, height: float = TILE_SIZE) -> PlacedObject:
    return PlacedObject.at_tile(name, tile_x, tile_y, width, height).add('type', object_type.value)


def player_object(tile_x: int, tile_y: int) -> PlacedObject:
    return typed('player', ObjectType.PLAYER, tile_x, tile_y, PLAYER_WIDTH_PX, PLAYER_HEIGHT_PX)


def arena_bounds_object(arena: Arena, is_start: bool = False) -> PlacedObject:
    """Full footprint, wall ring included, so doorway tiles count as inside."""
    obj = typed('arena_bounds', ObjectType.ARENA_BOUNDS, arena.origin_x, arena.origin_y,
                arena.width * TILE_SIZE, arena.height * TILE_SIZE)
    obj.add('arenaId', arena.id)
    if is_start:
        obj.add('isStart', True)
    return obj


def enemy_object(tile_x: int, tile_y: int, arena_id: str) -> PlacedObject:
    return (typed('enemy', ObjectType.ENEMY, tile_x, tile_y)
            .add('enemy_type', DEFAULT_ENEMY_TYPE)
            .add('arenaId', arena_id))


def gate_name(gate: GateDescriptor) -> str:
    name = f"gate_{gate.source_arena_id}_to_{gate.target_arena_id}_{gate.side}"
    if gate.lane_symbol:
        name += f"_{gate.lane_symbol}"
    return name


def gate_object(gate: GateDescriptor, with_tile_id: bool = False, name: Optional[str] = None) -> PlacedObject:
    """
    Lane gates carry their route; locked barriers carry their trigger group
    and start closed.
    """
    obj = typed(name or gate_name(gate), ObjectType.GATE, gate.x, gate.y,
                gate.width * TILE_SIZE, gate.height * TILE_SIZE)
    if gate.locked:
        obj.add('group', gate.group)
        obj.add('open', False)
    else:
        obj.add('sourceArenaId', gate.source_arena_id)
        obj.add('targetArenaId', gate.target_arena_id)
        if gate.lane_symbol:
            obj.add('traversalSymbol', gate.lane_symbol)
    if with_tile_id:
        obj.add('tileId', GATE_TILE_ID, 'int')
    return obj


def graph_socket_object(tile_x: int, tile_y: int, puzzle_type: str, node_id: str,
                        neighbors: str, on: Optional[bool] = None) -> PlacedObject:
    obj = (typed('socket', ObjectType.SOCKET, tile_x, tile_y)
           .add('puzzleType', puzzle_type)
           .add('nodeId', node_id)
           .add('neighbors', neighbors))
    if on is not None:
        obj.add('on', on)
    return obj.add('consume', False)


def win_trigger_object(tile_x: int, tile_y: int, group: str, puzzle_type: str) -> PlacedObject:
    """Hidden socket the puzzle system activates once solved."""
    return (typed('socket', ObjectType.SOCKET, tile_x, tile_y)
            .add('group', group)
            .add('puzzleType', puzzle_type)
            .add('winTrigger', True)
            .add('unlockDoorGroup', group)
            .add('activated', False))


def token_socket_object(tile_x: int, tile_y: int, group: str, token_id: str,
                        consume: bool = True) -> PlacedObject:
    return (typed('socket', ObjectType.SOCKET, tile_x, tile_y)
            .add('group', group)
            .add('requiresTokenId', token_id)
            .add('consumeToken', consume))


def token_object(tile_x: int, tile_y: int, token_id: str) -> PlacedObject:
    return typed('token', ObjectType.TOKEN, tile_x, tile_y).add('tokenId', token_id)


def algebra_terminal_object(tile_x: int, tile_y: int, terminal_type: str, op_id: str,
                            charges: Optional[int] = None) -> PlacedObject:
    obj = (typed('terminal', ObjectType.TERMINAL, tile_x, tile_y)
           .add('terminalType', terminal_type)
           .add('opId', op_id))
    if charges is not None:
        obj.add('charges', charges, 'int')
    return obj


def finale_objects(door_id: str, puzzle_id: str, door_pos: Tuple[int, int],
                   terminal_pos: Tuple[int, int], ciphertext: str, key: str,
                   answer: str, hint: str = VIGENERE_HINT,
                   prompt: str = FINALE_PROMPT,
                   allow_hidden_door: bool = True) -> List[PlacedObject]:
    """Hidden cipher puzzle door plus the terminal that opens it."""
    door = (typed('puzzledoor', ObjectType.PUZZLE_DOOR, *door_pos)
            .add('id', door_id)
            .add('locked', True)
            .add('puzzleId', puzzle_id)
            .add('isFinale', True)
            .add('hidden', True)
            .add('puzzleType', PUZZLE_TYPE_CIPHER)
            .add('ciphertext', ciphertext)
            .add('key', key)
            .add('answer', answer)
            .add('prompt', prompt)
            .add('hint', hint))
    terminal = typed('terminal', ObjectType.TERMINAL, *terminal_pos).add('doorId', door_id)
    if allow_hidden_door:
        terminal.add('allowHiddenDoor', True)
    return [door, terminal]
