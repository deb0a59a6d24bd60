from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('teams', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='ProblemStatementSetting',
            fields=[
                ('id', models.PositiveSmallIntegerField(primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=255)),
                ('max_participants', models.PositiveIntegerField()),
                ('is_active', models.BooleanField(default=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='HackawayRegistration',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('problem_statement_no', models.PositiveSmallIntegerField()),
                ('slot', models.PositiveSmallIntegerField()),
                ('rank', models.PositiveIntegerField(blank=True, null=True)),
                ('is_qualified', models.BooleanField(default=False)),
                ('ppt_link', models.URLField(blank=True, max_length=1024, null=True)),
                ('registered_at', models.DateTimeField(auto_now_add=True)),
                ('team', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='hackaway_registration', to='teams.team')),
            ],
            options={
                'indexes': [
                    models.Index(fields=['problem_statement_no'], name='hackaway_track_idx'),
                    models.Index(fields=['registered_at'], name='hackaway_registered_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('problem_statement_no', 'slot'), name='unique_hackaway_track_slot'),
                ],
            },
        ),
    ]
