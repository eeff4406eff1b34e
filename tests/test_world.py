import struct

from tcpfight.objects import EffectObject, PlayerObject
from tcpfight.packet import Packet
from tcpfight.protocol import DELAY_EFFECT, Action, ObjectType, PacketType, encode_action
from tcpfight.sprites import SpriteSheet
from tcpfight.surface import Surface
from tcpfight.world import World


def _bmp(width, height, color):
    pitch = width * 4
    pixels = color.to_bytes(4, "little") * (width * height)
    file_header = struct.pack("<HIHHI", 0x4D42, 54 + len(pixels), 0, 0, 54)
    info = struct.pack("<IiiHHIIiiII", 40, width, height, 1, 32, 0, pitch * height, 0, 0, 0, 0)
    return file_header + info + pixels


def _create(object_id, direction, x, y, hp):
    return Packet().write_i32(object_id).write_u8(direction).write_i16(x).write_i16(y).write_u8(hp)


def _action(object_id, direction, x, y):
    return Packet().write_i32(object_id).write_u8(direction).write_i16(x).write_i16(y)


def test_create_my_character():
    world = World()
    world.handle(PacketType.SC_CREATE_MY_CHARACTER, _create(5, 4, 200, 300, 90))
    player = world.player
    assert (player.object_id, player.facing, player.x, player.y, player.hp) == (5, 4, 200, 300, 90)
    assert player.is_player
    assert world.objects == [player]


def test_create_other_character():
    world = World()
    other = world.create_other_character(_create(9, 0, 20, 60, 50))
    assert world.player is None
    assert not other.is_player
    assert world.find(9) is other


def test_delete_character():
    world = World()
    world.create_my_character(_create(1, 0, 20, 60, 100))
    world.create_other_character(_create(2, 0, 30, 60, 100))
    world.handle(PacketType.SC_DELETE_CHARACTER, Packet().write_i32(1))
    assert [obj.object_id for obj in world.objects] == [2]
    assert world.player is None


def test_move_start_and_stop():
    world = World()
    other = world.create_other_character(_create(2, 0, 30, 60, 100))
    world.handle(PacketType.SC_MOVE_START, _action(2, Action.MOVE_RR, 40, 70))
    assert other.pending_action == Action.MOVE_RR
    assert (other.x, other.y) == (40, 70)
    world.handle(PacketType.SC_MOVE_STOP, _action(2, 4, 45, 71))
    assert other.pending_action == Action.STAND
    assert (other.x, other.y) == (45, 71)


def test_attack_messages():
    world = World()
    other = world.create_other_character(_create(2, 0, 30, 60, 100))
    world.handle(PacketType.SC_ATTACK3, _action(2, 0, 30, 60))
    assert other.pending_action == Action.ATTACK3
    world.attack(_action(2, 0, 30, 60), Action.ATTACK2)
    assert other.pending_action == Action.ATTACK2


def test_damage_adds_effect_and_sets_hp():
    world = World()
    other = world.create_other_character(_create(2, 0, 300, 200, 100))
    packet = Packet().write_i32(1).write_i32(2).write_u8(42)
    world.handle(PacketType.SC_DAMAGE, packet)
    assert other.hp == 42
    effect = world.objects[-1]
    assert isinstance(effect, EffectObject)
    assert (effect.x, effect.y, effect.sprite) == (300, 200 - 70, 60)


def test_damage_unknown_target_is_ignored():
    world = World()
    world.create_other_character(_create(2, 0, 300, 200, 100))
    world.damage(Packet().write_i32(1).write_i32(99).write_u8(42))
    assert len(world) == 1


def test_find_unknown_is_none():
    assert World().find(3) is None


def test_run_removes_finished_effects():
    world = World()
    world.objects.append(EffectObject(0, 10, 10, DELAY_EFFECT, 60, 63))
    for _ in range(100):
        world.run()
        if not world.objects:
            break
    assert world.objects == []


def test_own_character_sends_through_world():
    sent = []
    world = World(send=sent.append)
    player = world.create_my_character(_create(1, 0, 100, 100, 100))
    player.action_input(Action.MOVE_LL)
    world.run()
    assert sent == [encode_action(PacketType.CS_MOVE_START, Action.MOVE_LL, player.x, player.y)]


def test_draw_order_players_first_then_by_y():
    world = World()
    effect_low = EffectObject(0, 0, 500, DELAY_EFFECT, 60, 63)
    effect_high = EffectObject(0, 0, 10, DELAY_EFFECT, 60, 63)
    player_low = PlayerObject(1, 0, 100)
    player_low.set_position(0, 400)
    player_high = PlayerObject(2, 0, 100)
    player_high.set_position(0, 100)
    world.objects = [effect_low, player_low, effect_high, player_high]
    order = world.draw_order()
    assert order == [player_high, player_low, effect_high, effect_low]
    assert [obj.object_type for obj in order] == [ObjectType.PLAYER] * 2 + [ObjectType.EFFECT] * 2


def test_render_draws_map():
    sheet = SpriteSheet(100, 0x00FFFFFF)
    sheet.load_bytes(66, _bmp(2, 2, 0x00102030), 0, 0)
    surface = Surface(4, 4)
    World().render(sheet, surface)
    assert surface.get_pixel(0, 0) == 0x00102030
    assert surface.get_pixel(1, 1) == 0x00102030
    assert surface.get_pixel(3, 3) == 0xFFFFFFFF


def test_unknown_message_type_is_ignored():
    world = World()
    world.handle(PacketType.SC_SYNC, Packet().write_i32(1))
    assert world.objects == []