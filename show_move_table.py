#!/usr/bin/env python3
from cube_moves import get_move_table, STATE_SIZE

table = get_move_table()
print(f"Using seed: {table.seed}")
print(f"State size: {table.size}\n")

for name in table.names:
    forward, inverse = table.lookup(name)

    print("=" * 60)
    print(f"MOVE {name}")
    print("=" * 60)
    print(f"  forward: {list(forward)}")
    print(f"  inverse: {list(inverse)}")

    fixed = [i for i in range(STATE_SIZE) if forward[i] == i]
    print(f"  fixed positions: {fixed if fixed else 'None'}")

print("\n" + "=" * 60)
print("VERIFICATION")
print("=" * 60)
for name in table.names:
    forward, inverse = table.lookup(name)
    bijective = sorted(forward) == list(range(STATE_SIZE))
    exact_inverse = all(inverse[forward[i]] == i for i in range(STATE_SIZE))
    print(f"{name}: bijective={'✅' if bijective else '❌'} inverse={'✅' if exact_inverse else '❌'}")
